"""site_shot.crawler: HTTP fetcher and the breadth-first fallback crawler."""
