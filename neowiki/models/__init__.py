from neowiki.models.models import Page

__all__ = ["Page"]
