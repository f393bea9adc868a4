"""
This module defines activation functions which provide nonlinearities for neural networks.

Each activation comes with its derivative written in terms of the activation's
output, so backpropagation can reuse the activations from the forward pass
instead of keeping the pre-activations around.
"""
import numpy as np

from ..util import netlog

log = netlog.setup_logging("nnets_activations", level="INFO")


def standardize_activation_name(activation):
    """ If activation functions have more than one name, this function standardizes them.
    """
    activation = activation.lower()
    if activation in ["sig", "sigmoid", "logistic"]:
        activation = "sigmoid"

    return activation


def get_activation_func(activation):
    """Turns a string activation function name into a pair of functions,
    (activation, derivative in terms of the activation's output).
    """
    if isinstance(activation, str):
        activation = standardize_activation_name(activation)
        if activation == "sigmoid":
            activation_func = (sigmoid, dsigmoid)
        elif activation == "tanh":
            activation_func = (tanh, dtanh)
        else:
            raise ValueError("Unrecognized activation: {}".format(activation))
    else:
        activation_func = activation

    return activation_func


def sigmoid(X):
    """Logistic function, 1 / (1 + e^-x), applied elementwise."""
    return 1 / (1 + np.exp(-X))


def dsigmoid(A):
    """Derivative of the sigmoid, given A = sigmoid(X)."""
    return A * (1 - A)


tanh = np.tanh


def dtanh(A):
    return 1 - A ** 2
