"""
Fan-out over a set of exports generators.
"""

from typing import Iterator, List, Sequence

from .base import ExportsGenerator
from ..attributes.model import SourceFileAttributes


class ExportsGenerators:
    """
    Ordered collection of generators driven as one.

    Every call is forwarded to each generator in registration order.
    Commits are independent per target: if a later commit raises, the
    artifacts committed before it stay written.
    """

    def __init__(self) -> None:
        self._generators: List[ExportsGenerator] = []

    def add(self, generator: ExportsGenerator) -> None:
        self._generators.append(generator)

    def __iter__(self) -> Iterator[ExportsGenerator]:
        return iter(self._generators)

    def __len__(self) -> int:
        return len(self._generators)

    def write_begin(self) -> None:
        for generator in self._generators:
            generator.write_begin()

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool) -> None:
        for generator in self._generators:
            generator.write_functions(attributes, verbose)

    def write_end(self) -> None:
        for generator in self._generators:
            generator.write_end()

    def commit(self, includes: Sequence[str], prototypes: Sequence[str]) -> bool:
        """Commit every generator; True if any of them wrote its target."""
        wrote = False
        for generator in self._generators:
            if generator.commit(includes, prototypes):
                wrote = True
        return wrote
