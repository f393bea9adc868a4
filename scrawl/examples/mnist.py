"""
Train a network on the MNIST data.

The four IDX files are available from the MNIST distribution
(train-images-idx3-ubyte, train-labels-idx1-ubyte, t10k-images-idx3-ubyte,
t10k-labels-idx1-ubyte), optionally gzipped.
"""
from scrawl.data import files
from scrawl.data import readers
from scrawl.image import process
from scrawl.nnets import nets
from scrawl.nnets import training
from scrawl.util import netlog

log = netlog.setup_logging("examples_mnist", level="INFO")


def fit_mnist(train_images, train_labels, test_images, test_labels, n_hidden=784,
              n_epochs=5, learning_rate=0.1, random_state=42, n_report_errors=5):
    """Train a one-hidden-layer sigmoid network on whitened MNIST digits and score it
    on the test set.

    **Parameters**

    * `train_images`, `train_labels`, `test_images`, `test_labels` <str|file|Dataset>
        IDX files (or Datasets which have already been loaded).

    **Returns**

    A 3-tuple of (trained network, test set accuracy, DataFrame of per-epoch training cost)
    """
    train = _as_dataset(train_images, train_labels)
    test = _as_dataset(test_images, test_labels)
    log.info("Training on {!r}; testing on {!r}.".format(train, test))

    # Fit the whitening on the training set, and apply the same operator to the test set.
    zca = process.ZCA()
    train_features = zca.fit_transform(train.features())
    test_features = zca.transform(test.features())

    network = nets.TwoLayerNetwork(train.n_pixels, n_hidden, files.N_CLASSES,
                                   random_state=random_state)
    trainer = training.SGDTraining(learning_rate=learning_rate, n_epochs=n_epochs,
                                   random_state=random_state)
    trainer.fit(network, train_features, train.targets())

    predictions = network.predict_many(test_features)
    score = training.accuracy(predictions, test.labels)
    log.info("Correct/Totals: {}/{} = {:.3f}".format(int(round(score * len(test))),
                                                     len(test), score))
    for index in (predictions != test.labels).nonzero()[0][:n_report_errors]:
        log.info("Misclassified test image {}: label {}, predicted {}.".format(
            index, test.labels[index], predictions[index]))

    return network, score, trainer.history()


def _as_dataset(images, labels):
    if isinstance(images, readers.Dataset):
        return images
    return readers.load_dataset(images, labels)
