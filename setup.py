from setuptools import setup, find_packages

setup(
    name="connected-mesh",
    version="0.1.0",
    description="Connectivity, vertex repair, mass properties and offsetting for indexed triangle meshes",
    author="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["mesh_properties"],
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "trimesh",
        "matplotlib",
        "tqdm",
        "networkx",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
