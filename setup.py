from setuptools import find_packages, setup

package_name = "lse_manifold"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test", "test.*"]),
    data_files=[
        ("share/" + package_name + "/config", ["config/lse_manifold_base.yaml"]),
        ("share/" + package_name + "/config/presets", ["config/presets/quadruped.yaml"]),
    ],
    python_requires=">=3.9",
    install_requires=["setuptools", "numpy<2", "pydantic>=2", "PyYAML"],
    extras_require={"test": ["pytest", "scipy"]},
    zip_safe=True,
    maintainer="you",
    maintainer_email="you@example.com",
    description="Rotation conversions and composite-state boxplus/boxminus for robot state estimation",
    license="Apache-2.0",
    tests_require=["pytest", "scipy"],
)
