# Numeric defaults
import numpy as np
import torch

DTYPE = np.float64
TORCH_DTYPE = torch.float64

# tolerances used when comparing derivatives computed by different routes
RTOL = 1e-9
ATOL = 1e-12

DEFAULT_DEGREE = 2
