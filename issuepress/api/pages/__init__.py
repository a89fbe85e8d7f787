"""Blog page resources rendered from the site templates."""
