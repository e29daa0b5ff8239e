"""dockhand command line interface."""
