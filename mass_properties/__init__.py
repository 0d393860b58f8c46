from .integration import MassProperties, compute_mass_properties, compute_volume_integrals
