"""核心模块 - 接口、错误分类和依赖注入容器"""
