from vaultprune.repository.model import RepositoryModel

__all__ = ["RepositoryModel"]
