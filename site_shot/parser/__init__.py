"""site_shot.parser: Разбор sitemap.xml."""
