"""Sky CLI - provision and use Skyflow data vaults from the command line."""

__version__ = "0.3.0"
