"""Domain packages, one per bounded context: router / service / repository / schemas"""
