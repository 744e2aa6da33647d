from .classifier import ArchetypeProfile, classify, profile_for, signal_from_error, spawn_monster

__all__ = ["ArchetypeProfile", "classify", "profile_for", "signal_from_error", "spawn_monster"]
