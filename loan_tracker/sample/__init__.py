"""Sample data: the static mock dataset and a Faker-based generator."""

from loan_tracker.sample import fixtures
from loan_tracker.sample.generator import SampleDataGenerator, SampleDataset

__all__ = ["SampleDataGenerator", "SampleDataset", "fixtures"]
