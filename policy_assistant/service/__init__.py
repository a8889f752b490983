"""HTTP service and command-line front ends for the policy assistant."""
