"""Neural network code.

**Modules**

`nets` : The two-layer fully-connected network
`activations` : Non-linear activation functions and their derivatives
`training` : Controllers to run SGD optimization on neural network models
"""
