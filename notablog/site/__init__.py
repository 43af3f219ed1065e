from .builder import BuildSummary, SiteBuilder

__all__ = ["BuildSummary", "SiteBuilder"]
