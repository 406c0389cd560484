"""
Reference dataset for examples and tests.

Mastectomy survival data (Sauerbrei & Royston 1999; distributed as
HSAUR::mastectomy). 44 breast-cancer patients; time in months from
mastectomy to death or censoring, event = death observed, and
metastasized = 1 when the tumour had metastasized.
"""

import numpy as np

from bayesurv.core.datasource import DataSource

MASTECTOMY_COLUMNS = ("time", "event", "metastasized")

# time, event, metastasized
mastectomy = np.array([
    [23.0, 1.0, 0.0],
    [47.0, 1.0, 0.0],
    [69.0, 1.0, 0.0],
    [70.0, 0.0, 0.0],
    [100.0, 0.0, 0.0],
    [101.0, 0.0, 0.0],
    [148.0, 1.0, 0.0],
    [181.0, 1.0, 0.0],
    [198.0, 0.0, 0.0],
    [208.0, 0.0, 0.0],
    [212.0, 0.0, 0.0],
    [224.0, 0.0, 0.0],
    [5.0, 1.0, 1.0],
    [8.0, 1.0, 1.0],
    [10.0, 1.0, 1.0],
    [13.0, 1.0, 1.0],
    [18.0, 1.0, 1.0],
    [24.0, 1.0, 1.0],
    [26.0, 1.0, 1.0],
    [26.0, 1.0, 1.0],
    [31.0, 1.0, 1.0],
    [35.0, 1.0, 1.0],
    [40.0, 1.0, 1.0],
    [41.0, 1.0, 1.0],
    [48.0, 1.0, 1.0],
    [50.0, 1.0, 1.0],
    [59.0, 1.0, 1.0],
    [61.0, 1.0, 1.0],
    [68.0, 1.0, 1.0],
    [71.0, 1.0, 1.0],
    [76.0, 0.0, 1.0],
    [105.0, 0.0, 1.0],
    [107.0, 0.0, 1.0],
    [109.0, 0.0, 1.0],
    [113.0, 1.0, 1.0],
    [116.0, 0.0, 1.0],
    [118.0, 1.0, 1.0],
    [143.0, 1.0, 1.0],
    [145.0, 0.0, 1.0],
    [162.0, 0.0, 1.0],
    [188.0, 0.0, 1.0],
    [212.0, 0.0, 1.0],
    [217.0, 0.0, 1.0],
    [225.0, 0.0, 1.0],
])
mastectomy.setflags(write=False)


def load_mastectomy() -> DataSource:
    """Mastectomy data as a DataSource with columns time, event, metastasized."""
    return DataSource.from_arrays(
        **{name: mastectomy[:, j] for j, name in enumerate(MASTECTOMY_COLUMNS)}
    )
