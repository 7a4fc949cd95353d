"""
Curve building blocks: sensitivities of calibrated parameters to market quotes.

For each calibrated curve the bundle stores the rows of the inverse
calibration Jacobian that belong to the curve's parameters, with one column
per instrument of every curve the calibration depended on. The block says
which columns belong to which curve.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class CurveBuildingBlock:
    """
    Column layout of a building block matrix.

    Attributes:
        unit_map: Curve name -> (first column, number of columns), in column order
    """
    unit_map: Mapping[str, Tuple[int, int]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "unit_map", MappingProxyType(dict(self.unit_map)))

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(self.unit_map)

    @property
    def number_of_parameters(self) -> int:
        return sum(count for _, count in self.unit_map.values())

    def start(self, curve_name: str) -> int:
        return self.unit_map[curve_name][0]

    def count(self, curve_name: str) -> int:
        return self.unit_map[curve_name][1]


class CurveBuildingBlockBundle:
    """
    Building blocks by curve name.

    Attributes:
        blocks: Curve name -> (CurveBuildingBlock, matrix)
    """

    def __init__(self, blocks: Mapping[str, Tuple[CurveBuildingBlock, np.ndarray]] = None):
        self._blocks: Dict[str, Tuple[CurveBuildingBlock, np.ndarray]] = {}
        for name, (block, matrix) in (blocks or {}).items():
            matrix = np.array(matrix, dtype=np.float64)
            matrix.setflags(write=False)
            if matrix.ndim != 2 or matrix.shape[1] != block.number_of_parameters:
                raise ValueError(
                    f"Matrix for {name} has shape {matrix.shape}, block expects "
                    f"{block.number_of_parameters} columns"
                )
            self._blocks[name] = (block, matrix)

    @property
    def blocks(self) -> Mapping[str, Tuple[CurveBuildingBlock, np.ndarray]]:
        return MappingProxyType(self._blocks)

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(self._blocks)

    def get_block(self, curve_name: str) -> CurveBuildingBlock:
        return self._blocks[curve_name][0]

    def get_matrix(self, curve_name: str) -> np.ndarray:
        return self._blocks[curve_name][1]

    def merge(self, other: "CurveBuildingBlockBundle") -> "CurveBuildingBlockBundle":
        """Union by curve name; entries of ``other`` override entries of this bundle."""
        blocks = dict(self._blocks)
        blocks.update(other._blocks)
        return CurveBuildingBlockBundle(blocks)

    def to_frame(self, curve_name: str) -> pd.DataFrame:
        """
        Building block of one curve as a DataFrame.

        Rows are the curve's parameters; columns are (curve, instrument
        number) pairs of the instruments it depends on.
        """
        block, matrix = self._blocks[curve_name]
        columns = pd.MultiIndex.from_tuples(
            [(name, i) for name, (_, count) in block.unit_map.items() for i in range(count)],
            names=["curve", "instrument"]
        )
        return pd.DataFrame(matrix, index=pd.RangeIndex(matrix.shape[0], name="parameter"), columns=columns)

    def __contains__(self, curve_name: str) -> bool:
        return curve_name in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"CurveBuildingBlockBundle(curves={list(self._blocks)})"


__all__ = ["CurveBuildingBlock", "CurveBuildingBlockBundle"]
