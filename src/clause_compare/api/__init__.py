"""HTTP surface of the Clause Compare Relay."""
