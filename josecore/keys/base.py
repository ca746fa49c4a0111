"""Abstract key capability interface."""

from __future__ import annotations

import abc
from typing import Any, List, Mapping, Optional


class Key(metaclass=abc.ABCMeta):
    """A single JSON Web Key as seen by the selection algorithm and providers.

    Implementations are read-only once constructed.
    """

    @property
    @abc.abstractmethod
    def parameters(self) -> Mapping[str, Any]:
        """Full JWK description, including private members."""
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def public_parameters(self) -> Mapping[str, Any]:
        """Subset of ``parameters`` that is safe to publish."""
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def kty(self) -> str:
        raise NotImplementedError

    @property
    def use(self) -> Optional[str]:
        return None

    @property
    def kid(self) -> Optional[str]:
        return None

    @property
    def alg(self) -> Optional[str]:
        return None

    @property
    def key_ops(self) -> Optional[List[str]]:
        return None
