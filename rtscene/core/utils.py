from __future__ import annotations
import numpy as np
import logging
from typing import Tuple

Vec3 = Tuple[float, float, float]

ZERO3: Vec3 = (0.0, 0.0, 0.0)


def get_logger(name: str = "rtscene") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def ensure_unit_vectors(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    norms = np.linalg.norm(v, axis=1, keepdims=True)
    norms = np.clip(norms, eps, None)
    return v / norms

def as_vec3(row: np.ndarray) -> Vec3:
    return (float(row[0]), float(row[1]), float(row[2]))
