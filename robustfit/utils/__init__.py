from .uniform_random_generator import UniformRandomGenerator
from .score import (LMedSScoringFunction, MSACScoringFunction,
                    RansacScoringFunction, Score)
from .iteration import (getIterationNumber, getMinimumInlierNumber,
                        getProsacTerminationLength)
