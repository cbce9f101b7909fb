"""Link graph, rendering and build pipeline."""
