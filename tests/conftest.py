import os

# Select pystray's no-op backend so importing the controller needs no display.
os.environ.setdefault("PYSTRAY_BACKEND", "dummy")
