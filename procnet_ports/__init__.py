"""Map sockets from /proc/net to the processes holding them."""

__version__ = "0.1.0"
