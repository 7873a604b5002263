"""Shared fixtures for the diagram-generator test suite."""
from __future__ import annotations

import pytest

from diagram_generator.config import TestingConfig
from diagram_generator.core.java_parser import JavaParser
from diagram_generator.core.sql_parser import SQLParser


ECOMMERCE_SQL = """\
CREATE TABLE Customers (
    customer_id INT PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    email VARCHAR(100) UNIQUE,
    phone VARCHAR(20),
    address TEXT
);

CREATE TABLE Products (
    product_id INT PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    description TEXT,
    price DECIMAL(10, 2) NOT NULL,
    stock_quantity INT NOT NULL DEFAULT 0
);

CREATE TABLE Orders (
    order_id INT PRIMARY KEY,
    customer_id INT NOT NULL,
    order_date DATETIME NOT NULL,
    total_amount DECIMAL(10, 2),
    status VARCHAR(20),
    FOREIGN KEY (customer_id) REFERENCES Customers(customer_id)
);

CREATE TABLE OrderItems (
    order_item_id INT PRIMARY KEY,
    order_id INT NOT NULL,
    product_id INT NOT NULL,
    quantity INT NOT NULL,
    price DECIMAL(10, 2) NOT NULL,
    FOREIGN KEY (order_id) REFERENCES Orders(order_id),
    FOREIGN KEY (product_id) REFERENCES Products(product_id)
);

CREATE TABLE Categories (
    category_id INT PRIMARY KEY,
    name VARCHAR(50) NOT NULL,
    description TEXT
);

CREATE TABLE ProductCategories (
    product_id INT NOT NULL,
    category_id INT NOT NULL,
    PRIMARY KEY (product_id, category_id),
    FOREIGN KEY (product_id) REFERENCES Products(product_id),
    FOREIGN KEY (category_id) REFERENCES Categories(category_id)
);
"""


UNIVERSITY_JAVA = """\
package com.example;

public class Student extends Person implements Comparable<Student> {
    private int studentId;
    private double gpa;
    private Course currentCourse;

    public Student(int studentId, String name, int age) {
        super(name, age);
        this.studentId = studentId;
        this.gpa = 0.0;
    }

    public int getStudentId() {
        return studentId;
    }

    public double getGpa() {
        return gpa;
    }

    public void setGpa(double gpa) {
        this.gpa = gpa;
    }

    public Course getCurrentCourse() {
        return currentCourse;
    }

    public void enrollInCourse(Course course) {
        this.currentCourse = course;
    }

    @Override
    public int compareTo(Student other) {
        return Double.compare(this.gpa, other.gpa);
    }
}

abstract class Person {
    protected String name;
    protected int age;

    public Person(String name, int age) {
        this.name = name;
        this.age = age;
    }

    public String getName() {
        return name;
    }

    public int getAge() {
        return age;
    }

    public abstract void displayDetails();
}

class Course {
    private String courseId;
    private String title;
    private Professor instructor;

    public Course(String courseId, String title) {
        this.courseId = courseId;
        this.title = title;
    }

    public String getCourseId() {
        return courseId;
    }

    public String getTitle() {
        return title;
    }

    public Professor getInstructor() {
        return instructor;
    }

    public void assignInstructor(Professor instructor) {
        this.instructor = instructor;
    }
}

class Professor extends Person {
    private String employeeId;
    private String department;

    public Professor(String employeeId, String name, int age, String department) {
        super(name, age);
        this.employeeId = employeeId;
        this.department = department;
    }

    public String getEmployeeId() {
        return employeeId;
    }

    public String getDepartment() {
        return department;
    }

    @Override
    public void displayDetails() {
        System.out.println("Professor: " + name + ", Department: " + department);
    }
}

interface Comparable<T> {
    int compareTo(T other);
}
"""


@pytest.fixture
def ecommerce_sql() -> str:
    return ECOMMERCE_SQL


@pytest.fixture
def university_java() -> str:
    return UNIVERSITY_JAVA


@pytest.fixture
def sql_parser() -> SQLParser:
    """Provide a fresh SQLParser with layout disabled."""
    return SQLParser(TestingConfig)


@pytest.fixture
def java_parser() -> JavaParser:
    """Provide a fresh JavaParser with layout disabled."""
    return JavaParser(TestingConfig)
