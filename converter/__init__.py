"""
Batch conversion of k6 results into Allure test results.
"""

from .batch import BatchConverter, BatchOutcome, run_conversion

__all__ = ['BatchConverter', 'BatchOutcome', 'run_conversion']
