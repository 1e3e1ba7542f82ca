"""Marketing kits and partner micro-sites."""
