"""Tools for dumping audio clips out of SDP sound containers."""

__version__ = "0.1.0"
