"""jarpack - plans and builds JAR archives from Java build output."""

__version__ = "0.1.0"
