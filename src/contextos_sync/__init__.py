"""ContextOS vault sync: push Obsidian vault notes into Supabase tables."""

__version__ = "0.1.0"
