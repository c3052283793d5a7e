from .ransac import (ConfigurationError, LocallyOptimizedMSAC,
                     LORansacSettings, RansacSettings, RansacStatistics,
                     estimate, findHomography, fitLine, getIterationNumber,
                     loadSettings)

__version__ = "1.0.0"
