"""Drawing widgets: 3D point cloud, 2D cross-section and color legend."""
