from .stats import ReviewItem, accuracy, format_summary, review_items

__all__ = ["ReviewItem", "accuracy", "format_summary", "review_items"]
