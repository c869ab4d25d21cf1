"""
Base class for image difference algorithms.
"""

from abc import ABC, abstractmethod

from pixel_buffer import PixelBuffer


class Algorithm(ABC):
    """
    Abstract base class for computing the difference between two images.

    Subclasses implement compare() to provide different metrics. Settings
    such as thresholds are fixed at construction; compare() keeps no state
    between calls and never modifies its inputs. Each subclass documents the
    range of its score and the buffer layouts it accepts.
    """

    @abstractmethod
    def compare(self, a: PixelBuffer, b: PixelBuffer) -> float:
        """
        Compute a difference score between two buffers.

        Args:
            a: First image
            b: Second image

        Returns:
            0.0 when the images are identical under this metric, larger
            values for larger differences
        """
        pass
