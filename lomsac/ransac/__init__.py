from .lomsac import LocallyOptimizedMSAC, getIterationNumber
from .ransac_api import estimate, findHomography, fitLine
from .settings import (ConfigurationError, LORansacSettings, RansacSettings,
                       RansacStatistics, loadSettings)
