from .refiner import Refiner
