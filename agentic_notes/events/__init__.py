# Reactive channels and domain events package
