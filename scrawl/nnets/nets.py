"""This module describes the fully-connected network trained on the digit images.
"""
import numpy as np

from ..nnets import activations as act
from ..util import misc
from ..util import netlog


log = netlog.setup_logging("nets", level="INFO")


def init_weights(n_out, n_in, rng):
    """Uniform random weights in [-1/sqrt(n_in), 1/sqrt(n_in)], shape (n_out, n_in)."""
    limit = 1 / np.sqrt(n_in)
    return rng.uniform(low=-limit, high=limit, size=(n_out, n_in))


class TwoLayerNetwork(object):
    """
    A fully-connected network with one hidden layer and no bias terms.

    The network owns two weight matrices: `hidden`, of shape (n_hidden, n_in), and
    `final`, of shape (n_out, n_hidden). `train_step` is the only method which
    modifies them.

    **Parameters**

    * `n_in` <int>: Length of each input vector (number of pixels)
    * `n_hidden` <int>: Number of hidden units
    * `n_out` <int>: Number of output units (number of classes)

    **Optional Parameters**

    * `activation` <str|"sigmoid">: Nonlinearity used on both layers
    * `random_state` <int|np.random.RandomState|None>: Seeds the initial weights
    """
    def __init__(self, n_in, n_hidden, n_out, activation="sigmoid", random_state=None):
        if min(n_in, n_hidden, n_out) < 1:
            raise misc.ShapeError("Every layer needs at least one unit; got "
                                  "{}-{}-{}.".format(n_in, n_hidden, n_out))
        self.n_in, self.n_hidden, self.n_out = n_in, n_hidden, n_out
        self.activation = activation
        self.activation_func, self.activation_deriv = act.get_activation_func(activation)
        self.rng = misc.check_random_state(random_state)

        self.hidden = init_weights(n_hidden, n_in, self.rng)
        self.final = init_weights(n_out, n_hidden, self.rng)

        log.debug("Created a {}-{}-{} network with {} activations.".format(
            n_in, n_hidden, n_out, activation))

    def __repr__(self):
        return "<TwoLayerNetwork {}-{}-{} ({})>".format(self.n_in, self.n_hidden, self.n_out,
                                                        self.activation)

    def _check_vector(self, vec, length, name):
        vec = np.asarray(vec, dtype=np.float64)
        if vec.ndim == 2 and 1 in vec.shape:
            vec = vec.ravel()
        if vec.shape != (length,):
            raise misc.ShapeError("Expected `{}` to be a vector of length {}, but it has "
                                  "shape {}.".format(name, length, vec.shape))
        return vec

    def forward(self, x):
        """Run one input vector through the network.

        **Returns**

        A 2-tuple of (hidden layer activations, output layer activations).
        """
        x = self._check_vector(x, self.n_in, "x")
        return self._forward(x)

    def _forward(self, x):
        act0 = self.activation_func(np.dot(self.hidden, x))
        act1 = self.activation_func(np.dot(self.final, act0))
        return act0, act1

    def predict_proba(self, x):
        """Output layer activations for one input vector."""
        return self.forward(x)[1]

    def predict(self, x):
        """The index of the most active output unit. Ties go to the lowest index."""
        return misc.argmax(self.predict_proba(x))

    def predict_many(self, X):
        """Run `predict` on each row of a 2D array."""
        return np.array([self.predict(x) for x in np.asarray(X)], dtype=int)

    def train_step(self, x, y, learning_rate):
        """Do one forward and backward pass on a single example and update the weights
        in place.

        The weights move along the gradient of the output error `y - prediction`, so the
        update is added to the weights rather than subtracted.

        **Parameters**

        * `x` <array>: Input vector of length `n_in`
        * `y` <array>: Target vector of length `n_out`, normally one-hot
        * `learning_rate` <float>: Scales both weight updates

        **Returns**

        The summed (signed) output error for this example, before the update.

        **Raises**

        `ShapeError` if `x` or `y` has the wrong length. The weights are unchanged.
        """
        x = self._check_vector(x, self.n_in, "x")
        y = self._check_vector(y, self.n_out, "y")

        act0, pred = self._forward(x)

        # Backpropagation.
        output_errors = y - pred
        cost = float(np.sum(output_errors))
        hidden_errors = np.dot(self.final.T, output_errors)

        output_errors *= self.activation_deriv(pred)
        hidden_errors *= self.activation_deriv(act0)

        dfinal = np.outer(output_errors, act0)
        dhidden = np.outer(hidden_errors, x)

        # Gradient update.
        self.final += learning_rate * dfinal
        self.hidden += learning_rate * dhidden

        return cost
