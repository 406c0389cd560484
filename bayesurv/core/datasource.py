"""
Universal DataSource for bayesurv.

DataSource is the "I have data" abstraction: named, equally long numeric
columns loaded from arrays, a pandas DataFrame or a CSV file. It doesn't
know which column is a time, an event flag or a covariate; that mapping
happens in SurvivalDesign.from_datasource.

Usage:
    from bayesurv.core.datasource import DataSource

    ds = DataSource.from_arrays(time=t, event=e, metastasized=x)
    ds = DataSource.from_file("mastectomy.csv")
    ds = DataSource.from_dataframe(df)

    ds.keys()   # frozenset({'time', 'event', 'metastasized'})
    t = ds['time']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from bayesurv.core.exceptions import ValidationError, DimensionError
from bayesurv.core.capabilities import (
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Column container. Domain-agnostic.

    Construct via factory classmethods, not directly.
    """
    _data: dict[str, Any]
    _capabilities: frozenset[str]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    def __getitem__(self, key: str) -> NDArray:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, listing the available columns
        """
        if key not in self._data:
            available = sorted(self.keys())
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    def supports(self, capability: str) -> bool:
        """Unknown capabilities return False, never raise."""
        return capability in self._capabilities

    # === Factory Methods ===

    @classmethod
    def from_arrays(cls, **named_arrays) -> DataSource:
        """Construct from equally long 1-D array-likes passed by name."""
        if not named_arrays:
            raise ValidationError("from_arrays() requires at least one column")

        storage: dict[str, NDArray] = {}
        for name, arr in named_arrays.items():
            try:
                col = np.asarray(arr, dtype=np.float64)
            except (ValueError, TypeError) as e:
                raise ValidationError(
                    f"column '{name}': cannot convert to float64: {e}"
                ) from e
            if col.ndim != 1:
                raise DimensionError(
                    f"column '{name}': expected 1D array, got shape {col.shape}"
                )
            storage[name] = col

        lengths = {name: len(col) for name, col in storage.items()}
        if len(set(lengths.values())) > 1:
            raise DimensionError(f"Inconsistent column lengths: {lengths}")

        return cls(
            _data=storage,
            _capabilities=frozenset({CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE}),
            _metadata={
                'n_observations': next(iter(lengths.values())),
                'source': 'arrays',
                'columns': list(storage),
            },
        )

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from a delimited text file (CSV, TSV)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix not in ('.csv', '.tsv'):
            raise ValidationError(f"Unknown file format: {suffix}")

        import pandas as pd
        sep = '\t' if suffix == '.tsv' else ','
        df = pd.read_csv(path, sep=sep, usecols=columns)
        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """
        Construct from a pandas DataFrame.

        Boolean columns become 0.0 / 1.0. Non-numeric columns raise, so
        categorical covariates must be encoded before loading.
        """
        storage: dict[str, NDArray] = {}

        for col in df.columns:
            try:
                storage[str(col)] = df[col].to_numpy(dtype=np.float64)
            except (ValueError, TypeError) as e:
                raise ValidationError(
                    f"column '{col}': non-numeric dtype {df[col].dtype}; "
                    f"encode it numerically before loading"
                ) from e

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': list(storage),
        }
        if source_path:
            metadata['source_path'] = source_path

        return cls(
            _data=storage,
            _capabilities=frozenset({CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE}),
            _metadata=metadata,
        )

    @classmethod
    def build(cls, *args, **kwargs) -> DataSource:
        """
        Convenience factory that dispatches to the appropriate from_* method.

        Examples:
            DataSource.build(time=t, event=e)   # from_arrays
            DataSource.build("data.csv")        # from_file
            DataSource.build(df)                # from_dataframe
        """
        if args and isinstance(args[0], (str, Path)):
            return cls.from_file(args[0], **kwargs)
        if args and hasattr(args[0], 'columns'):
            return cls.from_dataframe(args[0], **kwargs)
        return cls.from_arrays(**kwargs)
