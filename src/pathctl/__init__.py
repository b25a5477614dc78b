"""pathctl — point graph with bounded acyclicity and atomic mutations."""

__version__ = "0.4.0"
