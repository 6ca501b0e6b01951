"""quicker-git - shortcuts and interactive wizards on top of git."""

__version__ = "1.0.0"
