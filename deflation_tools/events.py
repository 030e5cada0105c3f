import threading

# Set from signal handlers; the display loop exits once it sees it.
shutdown_event = threading.Event()
