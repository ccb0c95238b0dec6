"""Audio front end: capture, file input and aubio pitch tracking.

Submodules are imported directly so that file analysis works on machines
without PortAudio (``live_input`` and ``audio_device`` need it).
"""
