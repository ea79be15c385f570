from fips_180_4.sha import InputTooLarge, Sha256, digest

__all__ = ["InputTooLarge", "Sha256", "digest"]
