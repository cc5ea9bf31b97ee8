from filepipe.analysis.base import BaseAnalyzer
from filepipe.analysis.classifier import classify
from filepipe.analysis.factory import AnalyzerFactory

__all__ = ["AnalyzerFactory", "BaseAnalyzer", "classify"]
