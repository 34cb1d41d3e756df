"""Internal resolution machinery. Import from ``masmnav.index`` instead."""
