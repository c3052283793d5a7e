from .logger import setupLogger
from .score import MSACScoringFunction
from .uniform_random_generator import UniformRandomGenerator
