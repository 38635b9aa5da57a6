from .recipe_scraper import RecipeScraper, scrape_recipe_from_url

__all__ = ['RecipeScraper', 'scrape_recipe_from_url']
