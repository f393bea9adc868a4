"""
Take a model and data, and use single-example stochastic gradient descent to fit the model to the data.
"""
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from ..data import readers
from ..util import misc
from ..util import netlog


log = netlog.setup_logging("nnet_training", level="INFO")


def format_cost(name, val):
    """Return a string representing the cost, suitable for log output during training."""
    name, val = misc.as_list(name), misc.as_list(val)
    cost_string = []
    for n, v in zip(name, val):
        n = n.lower().replace(" ", "_")
        if n in ["cost", "avg_cost"]:
            cost_string.append("average cost is {:.5}".format(v))
        elif n in ["accuracy"]:
            cost_string.append("accuracy is {:.2%}".format(v))

    return "; ".join(cost_string)


def accuracy(predictions, labels):
    """Fraction of `predictions` equal to `labels`. Zero if there's nothing to score."""
    predictions, labels = np.asarray(predictions).ravel(), np.asarray(labels).ravel()
    if len(predictions) != len(labels):
        raise misc.ShapeError("Got {} predictions for {} labels.".format(len(predictions),
                                                                         len(labels)))
    if len(labels) == 0:
        return 0.
    return float(np.sum(predictions == labels)) / len(labels)


class SGDTraining(object):
    """
    Train a network one example at a time, for a fixed number of epochs at a fixed
    learning rate. After every epoch, the training examples are shuffled.

    **Parameters**

    * `learning_rate` <float|0.1>
    * `n_epochs` <int|5>
    * `random_state` <int|np.random.RandomState|None>
        Controls the shuffles between epochs.
    """
    def __init__(self, learning_rate=0.1, n_epochs=5, random_state=None):
        if n_epochs is None or n_epochs < 0:
            raise ValueError("Enter a non-negative number of training epochs.")
        self.learning_rate = learning_rate
        self.n_epochs = n_epochs
        self.rng = misc.check_random_state(random_state)

        self.epoch = 0
        self.examples_seen = 0
        self.time_training = timedelta(0)
        self.cost_history = []

    def iter_fit(self, network, features, targets=None):
        """Train `network` in place, yielding (epoch number, average cost) after each epoch.

        **Parameters**

        * `network` <TwoLayerNetwork>
        * `features` <array|readers.Data>: Design matrix, one example per row. If not a
            `Data` object, the rows are copied before shuffling.
        * `targets` <array>: One-hot targets, one row per example. Ignored if `features`
            is a `Data` object.
        """
        data = features if isinstance(features, readers.Data) else readers.Data(features, targets)
        if data.targets is None:
            raise ValueError("Supply training targets along with the features.")

        log.info("Beginning training of {} on {} examples.".format(network, len(data)))
        for _ in range(self.n_epochs):
            epoch_start_time = datetime.now()
            self.epoch += 1

            total_cost = 0.
            for x, y in data.iter_epoch():
                total_cost += network.train_step(x, y, self.learning_rate)
            self.examples_seen += len(data)

            avg_cost = total_cost / len(data) if len(data) else 0.
            self.cost_history.append((self.epoch, avg_cost, len(data)))
            self.time_training += datetime.now() - epoch_start_time
            log.info("Epoch {}: {}.".format(self.epoch, format_cost("avg_cost", avg_cost)))

            data.shuffle(rng=self.rng)

            yield self.epoch, avg_cost

        log.info("Optimization complete. Total examples seen: {}".format(self.examples_seen))
        if self.time_training.total_seconds() > 0:
            log.info("The code ran for {} epochs at {:.3} epochs/min.".format(
                self.epoch, 60 * self.epoch / self.time_training.total_seconds()))

    def fit(self, network, features, targets=None):
        """Train `network` for `n_epochs` epochs. Returns the network."""
        for _ in self.iter_fit(network, features, targets):
            pass
        return network

    def history(self):
        """Average training cost per epoch, as a DataFrame."""
        return pd.DataFrame(self.cost_history, columns=["epoch", "avg_cost", "n_examples"])

    def evaluate(self, network, features, labels):
        """Fraction of rows of `features` which `network` assigns to the right label."""
        score = accuracy(network.predict_many(features), labels)
        log.info("Evaluated {} examples: {}.".format(len(labels), format_cost("accuracy", score)))
        return score
