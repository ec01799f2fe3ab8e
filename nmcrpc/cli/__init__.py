"""Command line utilities: nmreg and nmupdate."""
