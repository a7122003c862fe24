"""What To Eat backend: meals, restaurants and the favorites that tie them to users."""

__version__ = "0.1.0"
