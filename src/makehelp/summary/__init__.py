from makehelp.summary.extractor import SummaryExtractor, extract_summary

__all__ = ["SummaryExtractor", "extract_summary"]
