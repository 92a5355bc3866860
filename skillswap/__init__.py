"""SkillSwap — skill-exchange marketplace backend."""

__version__ = "0.1.0"
