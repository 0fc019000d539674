"""issuebridge - carry GitHub issue conversations over email and back."""

__version__ = "0.1.0"
