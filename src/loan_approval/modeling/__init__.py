"""
Modeling layer for training and inference.

Provides splitting, the declared feature pipeline, logistic-regression
training, and model persistence.
"""
