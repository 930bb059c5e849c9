"""Vector similarity scoring."""

import numpy as np
import structlog

logger = structlog.get_logger("vectorizer.similarity")


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Compute cosine similarity between two 1-D vectors.

    Returns ``0.0`` when the vectors have different lengths or either has a
    zero norm. A length mismatch means vectors from different fits were mixed;
    it is logged rather than raised.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    if a.shape != b.shape:
        logger.warning(
            "Dimension mismatch in cosine similarity",
            left_dimension=a.shape[0] if a.ndim else 0,
            right_dimension=b.shape[0] if b.ndim else 0,
        )
        return 0.0

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))
