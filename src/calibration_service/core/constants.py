"""
Response codes shared by the response matrix and the estimation kernels.

Responses are stored as int8 so that "not administered" has its own code
and is never confused with an incorrect answer.
"""

MISSING_VALUE = -1
INCORRECT = 0
CORRECT = 1

VALID_RESPONSE_CODES = (MISSING_VALUE, INCORRECT, CORRECT)
