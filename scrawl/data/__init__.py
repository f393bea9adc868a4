"""Reading and iterating over digit images and labels."""
